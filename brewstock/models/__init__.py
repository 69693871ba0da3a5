from brewstock.models.location import Location, LocationType
from brewstock.models.catalog import Category, Item, Supplier
from brewstock.models.inventory import StockLevel
from brewstock.models.transaction import InventoryTransaction
