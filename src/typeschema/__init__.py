# flake8: noqa
from .__about__ import __version__
from .annotations import *
from .document import SchemaDocument
from .errors import *
from .generator import *
from .modules import *
from .reflection import describe, members, parameters
from .registry import ModuleRegistry, NamingDecision
from .schema import SchemaVersion
from .serde import Case, SerdeFlags
