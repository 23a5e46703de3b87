from models.regions import Region
from models.communes import Commune
from models.payment_types import PaymentType
from models.status import Status
from models.document_types import DocumentType
from models.tax_rates import TaxRate
from models.categories import Category, TransactionType
from models.clients import Client
from models.vendors import Vendor
from models.companies import Company, CompanyUser
from models.transactions import Transaction
from models.transaction_payments import TransactionPayment

__all__ = ['Category', 'Client', 'Commune', 'Company', 'CompanyUser', 'DocumentType', 'PaymentType', 'Region', 'Status', 'TaxRate', 'Transaction', 'TransactionPayment', 'TransactionType', 'Vendor',]
