"""Schema extraction: path handling, field collection, ranking and seeding."""

from crdforge.strategies.schema.collector import Candidate, SchemaFieldCollector
from crdforge.strategies.schema.extractor import CRDSchemaExtractor
from crdforge.strategies.schema.fallback import FallbackSchemaExtractor, normalize_id
from crdforge.strategies.schema.paths import PathSyntaxError, get_path, parse_path, set_path
from crdforge.strategies.schema.seeds import ServiceSeeder, default_recognizers
from crdforge.strategies.schema.validator import validate_crd

__all__ = [
    "Candidate",
    "SchemaFieldCollector",
    "CRDSchemaExtractor",
    "FallbackSchemaExtractor",
    "ServiceSeeder",
    "default_recognizers",
    "normalize_id",
    "validate_crd",
    "PathSyntaxError",
    "parse_path",
    "set_path",
    "get_path",
]
