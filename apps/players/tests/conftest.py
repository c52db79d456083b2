import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
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
    """Create and return the organiser who owns the roster."""
    return User.objects.create_user(
        email='organiser@example.com',
        password='TestPass123!',
        display_name='Match Organiser',
    )


@pytest.fixture
def other_organiser(db):
    """Create and return an organiser with a separate roster."""
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
def player(organiser):
    """A regular player with a nickname."""
    return Player.objects.create(
        owner=organiser,
        first_name='Rahul',
        last_name='Sharma',
        nickname='Rocky',
        mobile='8888888888',
        regular=True,
    )


@pytest.fixture
def roster(organiser, player):
    """Three players: the fixture player plus two additional ones."""
    return [
        player,
        Player.objects.create(
            owner=organiser,
            first_name='Amit',
            last_name='Patel',
            mobile='7777777777',
        ),
        Player.objects.create(
            owner=organiser,
            first_name='Vikas',
            mobile='6666666666',
            balance=120.0,
        ),
    ]


@pytest.fixture
def other_player(other_organiser):
    """A player on the other organiser's roster."""
    return Player.objects.create(
        owner=other_organiser,
        first_name='Sai',
        last_name='Ragha',
        mobile='9999999999',
    )
