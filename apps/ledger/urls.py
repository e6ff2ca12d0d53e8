from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'ledger'

router = DefaultRouter()
router.register(r'sales', views.SaleViewSet, basename='sale')
router.register(r'purchases', views.PurchaseViewSet, basename='purchase')
router.register(r'payments', views.PaymentViewSet, basename='payment')

customer = {'party_type': 'customer'}
supplier = {'party_type': 'supplier'}

urlpatterns = [
    # Order ViewSet routes
    # GET    /api/ledger/sales/                  - List sales, newest first
    # POST   /api/ledger/sales/                  - Record a sale
    # GET    /api/ledger/sales/{id}/             - Get sale
    # PATCH  /api/ledger/sales/{id}/payment/     - Manual paid-amount edit
    # (same routes under /api/ledger/purchases/)

    # Payment receipts
    # GET    /api/ledger/payments/               - List receipts (?party_type=&party_name=)
    # GET    /api/ledger/payments/{id}/          - Get receipt

    # Balance sheet
    path('balance/', views.balance_sheet, name='balance'),

    # Party reports and payments
    # GET    /api/ledger/customers/                    - Per-customer summaries
    # GET    /api/ledger/customers/{name}/             - One customer's summary + orders
    # GET    /api/ledger/customers/{name}/payments/    - Customer's receipts
    # POST   /api/ledger/customers/{name}/payments/    - Allocate a payment
    path('customers/', views.party_report_list, customer, name='customer-report-list'),
    path('customers/<str:party_name>/', views.party_report_detail, customer, name='customer-report'),
    path('customers/<str:party_name>/payments/', views.party_payments, customer, name='customer-payments'),
    path('suppliers/', views.party_report_list, supplier, name='supplier-report-list'),
    path('suppliers/<str:party_name>/', views.party_report_detail, supplier, name='supplier-report'),
    path('suppliers/<str:party_name>/payments/', views.party_payments, supplier, name='supplier-payments'),

    # Include router URLs
    path('', include(router.urls)),
]
