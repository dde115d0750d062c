"""
Closed value sets for units, allergens, categories and equipment.
"""
from enum import Enum


class Unit(str, Enum):
    """Units of measurement. No conversion is performed between them."""
    G = "g"
    KG = "kg"
    ML = "ml"
    CL = "cl"
    L = "L"
    PCS = "pcs"
    TBSP = "tbsp"
    TSP = "tsp"
    CUP = "cup"
    OZ = "oz"


class Allergen(str, Enum):
    GLUTEN = "gluten"
    CRUSTACEANS = "crustaceans"
    EGGS = "eggs"
    FISH = "fish"
    PEANUTS = "peanuts"
    SOYBEANS = "soybeans"
    MILK = "milk"
    NUTS = "nuts"
    CELERY = "celery"
    MUSTARD = "mustard"
    SESAME = "sesame"
    SULPHITES = "sulphites"
    LUPIN = "lupin"
    MOLLUSCS = "molluscs"
    NONE = "none"


class Category(str, Enum):
    MAIN = "main"
    APPETIZER = "appetizer"
    DESSERT = "dessert"
    COCKTAIL = "cocktail"
    BEVERAGE = "beverage"  # non-alcoholic
    SALAD = "salad"
    SAUCE = "sauce"
    SOUP = "soup"
    SIDE = "side"
    BREAKFAST = "breakfast"


class Subcategory(str, Enum):
    # Cuisines and diets
    ITALIAN = "italian"
    FRENCH = "french"
    ASIAN = "asian"
    MEXICAN = "mexican"
    AMERICAN = "american"
    SPANISH = "spanish"
    GREEK = "greek"
    JAPANESE = "japanese"
    INDIAN = "indian"
    THAI = "thai"
    MIDDLE_EASTERN = "middle_eastern"
    VEGAN = "vegan"
    VEGETARIAN = "vegetarian"
    GLUTEN_FREE = "gluten_free"
    FUSION = "fusion"
    # Spirits (cocktails)
    RUM = "rum"
    VODKA = "vodka"
    GIN = "gin"
    WHISKEY = "whiskey"
    TEQUILA = "tequila"
    WINE = "wine"
    NONE = "none"


class Equipment(str, Enum):
    POT = "pot"
    PAN = "pan"
    SKILLET = "skillet"
    OVEN = "oven"
    MIXER = "mixer"
    BLENDER = "blender"
    FOOD_PROCESSOR = "food_processor"
    GRILL = "grill"
    KNIFE = "knife"
    CUTTING_BOARD = "cutting_board"
    MEASURING_CUPS = "measuring_cups"
    MEASURING_SPOONS = "measuring_spoons"
    COLANDER = "colander"
    GRATER = "grater"
    SHAKER = "shaker"
    JIGGER = "jigger"
    STRAINER = "strainer"
    MUDDLER = "muddler"
    BAR_SPOON = "bar_spoon"


class SortBy(str, Enum):
    """Named sort orders for recipe listings."""
    NAME = "name"
    COST_LOW = "cost_low"
    COST_HIGH = "cost_high"
    MARGIN = "margin"
