from .database_storage import AiracStorage
from .field_definitions import FieldType, FieldDefinition, SchemaManager

__all__ = ['AiracStorage', 'FieldType', 'FieldDefinition', 'SchemaManager']
