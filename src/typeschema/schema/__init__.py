from .builder import SchemaBuilder
from .definitions import Definition, DefinitionsTable
from .field import *
from .keywords import KeywordSet, SchemaKeyword, SchemaVersion, get_keywords
from .writer import SchemaWriter
