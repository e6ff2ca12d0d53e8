from django.urls import path
from . import views

app_name = 'directory'

urlpatterns = [
    # GET    /api/customers/            - List customers
    # POST   /api/customers/            - Create or get customer
    # GET    /api/customers/search/?q=  - Search customers
    path('customers/', views.party_list_create, {'kind': 'customer'}, name='customer-list'),
    path('customers/search/', views.party_search, {'kind': 'customer'}, name='customer-search'),

    # Same routes for suppliers
    path('suppliers/', views.party_list_create, {'kind': 'supplier'}, name='supplier-list'),
    path('suppliers/search/', views.party_search, {'kind': 'supplier'}, name='supplier-search'),

    # GET    /api/products/  - List products
    # POST   /api/products/  - Add product
    path('products/', views.product_list_create, name='product-list'),
]
