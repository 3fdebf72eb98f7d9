from django.urls import path
from . import views

app_name = 'rewards'

urlpatterns = [
    path('balance/', views.my_balance, name='balance'),
    path('credits/', views.RewardCreditListView.as_view(), name='credit-list'),
]
