from enum import Enum


class PackageStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    ARCHIVED = "Archived"


class PackageCategory(str, Enum):
    ADVENTURE = "Adventure"
    RELAXATION = "Relaxation"
    CULTURAL = "Cultural"
    FAMILY = "Family"
    HONEYMOON = "Honeymoon"
    WILDLIFE = "Wildlife"
    HERITAGE = "Heritage"
