from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'ledger'

router = DefaultRouter()
router.register(r'weekends', views.WeekendViewSet, basename='weekend')
router.register(r'matches', views.MatchViewSet, basename='match')
router.register(r'payments', views.PaymentViewSet, basename='payment')
router.register(r'players', views.PlayerLedgerViewSet, basename='player-ledger')

urlpatterns = [
    # GET    /api/ledger/weekends/                 - All weekends
    # GET    /api/ledger/weekends/current/         - Current weekend
    # POST   /api/ledger/weekends/advance/         - Start next weekend
    # GET    /api/ledger/weekends/{id}/            - Weekend with matches
    # GET    /api/ledger/weekends/{id}/summary/    - Ledger rows for weekend
    # POST   /api/ledger/weekends/{id}/matches/    - Create/edit a match
    # PUT    /api/ledger/matches/{id}/             - Edit match
    # DELETE /api/ledger/matches/{id}/             - Delete match
    # POST   /api/ledger/payments/{id}/record/     - Record amount paid
    # POST   /api/ledger/payments/{id}/toggle/     - Toggle paid/unpaid
    # GET    /api/ledger/players/{id}/             - Player's ledger row
    # POST   /api/ledger/players/{id}/settle/      - Mark fully paid/unpaid
    # POST   /api/ledger/players/{id}/outstanding/ - Override outstanding
    path('summary/', views.ledger_summary, name='ledger-summary'),
    path('export/', views.export_data, name='ledger-export'),
    path('import/', views.import_data, name='ledger-import'),
    path('reset/', views.reset_data, name='ledger-reset'),
    path('', include(router.urls)),
]
