from .category import Category
from .subcategory import Subcategory, product_subcategory
from .image import Image
from .pdf import Pdf
from .product import Product
from .enums import AttachmentKind, ImageOwnerType


__all__ = [
    'Category',
    'Subcategory',
    'product_subcategory',
    'Image',
    'Pdf',
    'Product',
    'AttachmentKind',
    'ImageOwnerType',
]
