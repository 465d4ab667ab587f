from .guide import Guide, GuideAvailability, GuideSpecialization, GuideSearchTerm
from .homestay import Homestay, HomestayStatus, PropertyType, HomestaySearchTerm
