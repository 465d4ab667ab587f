from .guide import GuideCreate, GuideUpdate, GuideOut, GuideLocation, GuidePricing
from .homestay import (
    HomestayCreate,
    HomestayUpdate,
    HomestayOut,
    HomestayLocation,
    HomestayPricing,
    HomestayCapacity,
    Coordinates,
)
