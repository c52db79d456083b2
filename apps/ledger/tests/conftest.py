import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.ledger.services import get_current_weekend, save_match
from apps.players.models import Player


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def organiser(db):
    """Create and return the organiser who owns the ledger."""
    return User.objects.create_user(
        email='organiser@example.com',
        password='TestPass123!',
        display_name='Match Organiser',
    )


@pytest.fixture
def other_organiser(db):
    """Create and return an organiser with a separate ledger."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other Organiser',
    )


@pytest.fixture
def organiser_client(organiser):
    """Return API client authenticated as organiser."""
    return _client_for(organiser)


@pytest.fixture
def other_client(other_organiser):
    """Return API client authenticated as the other organiser."""
    return _client_for(other_organiser)


@pytest.fixture
def players(organiser):
    """Three players: Sai, Rahul (nickname Rocky) and Amit."""
    return [
        Player.objects.create(
            owner=organiser, first_name='Sai', last_name='Ragha', mobile='9999999999',
        ),
        Player.objects.create(
            owner=organiser, first_name='Rahul', last_name='Sharma', nickname='Rocky',
            mobile='8888888888', regular=True,
        ),
        Player.objects.create(
            owner=organiser, first_name='Amit', last_name='Patel', mobile='7777777777',
        ),
    ]


@pytest.fixture
def other_player(other_organiser):
    return Player.objects.create(owner=other_organiser, first_name='Rohit')


@pytest.fixture
def weekend(organiser):
    """The organiser's current weekend."""
    return get_current_weekend(owner=organiser)


@pytest.fixture
def saturday_match(organiser, weekend, players):
    """Saturday match: 300 ground + 150 cafeteria across three players."""
    return save_match(
        owner=organiser,
        weekend_id=weekend.id,
        match_type='Saturday',
        ground_cost=300.0,
        cafeteria_cost=150.0,
        player_ids=[p.id for p in players],
    )
