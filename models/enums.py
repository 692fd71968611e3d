from enum import Enum


class AttachmentKind(Enum):
    IMAGE = 'image'
    PDF = 'pdf'


class ImageOwnerType(Enum):
    PRODUCT = 'product'
