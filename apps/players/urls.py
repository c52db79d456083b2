from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'players'

router = DefaultRouter()
router.register(r'', views.PlayerViewSet, basename='player')

urlpatterns = [
    # GET    /api/players/         - List roster (?search=, ?regular=)
    # POST   /api/players/         - Add player
    # GET    /api/players/{id}/    - Player details
    # PUT    /api/players/{id}/    - Update player
    # PATCH  /api/players/{id}/    - Partial update
    # DELETE /api/players/{id}/    - Delete player (and their payments)
    path('', include(router.urls)),
]
