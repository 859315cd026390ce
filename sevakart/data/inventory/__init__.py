from sevakart.data.inventory.inventory_item import InventoryItem

__all__ = ['InventoryItem']
