from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from . import views

app_name = 'accounts'

urlpatterns = [
    # Authentication
    path('auth/login/', views.login, name='login'),
    path('auth/logout/', views.logout, name='logout'),
    path('auth/me/', views.get_current_user, name='current-user'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),

    # User management
    # GET    /api/users/               - List users (admin)
    # POST   /api/users/               - Create user (admin)
    # PATCH  /api/users/{id}/toggle/   - Activate / deactivate (admin)
    path('users/', views.user_list_create, name='user-list'),
    path('users/<uuid:pk>/toggle/', views.toggle_user, name='user-toggle'),
]
