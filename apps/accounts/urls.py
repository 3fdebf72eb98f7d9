from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    path('me/', views.get_current_user, name='current-user'),
]
