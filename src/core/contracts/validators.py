"""
JSON Schema Contract Validators

Проверка внешних данных metalog engine по JSON Schema (Draft 2020-12).
Источник коэффициентов передаёт набор a_1..a_N и носитель в формате
metalog_distribution.json; значения SD59x18 — строки масштабированного
целого, поэтому JSON float до движка не доходит.

Схемы лежат в schema/ внутри пакета и устанавливаются вместе с ним.
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Загрузка и meta-валидация схем из SCHEMA_DIR с кэшем по имени."""

    def __init__(self, schema_dir: Path = SCHEMA_DIR):
        if not schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {schema_dir}")
        self._schema_dir = schema_dir
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени файла без расширения.

        Raises:
            FileNotFoundError: файла schema_name.json нет
            ValueError: файл не является корректной Draft 2020-12 схемой
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.is_file():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_path.name}: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор одного контракта, схема берётся из общего загрузчика."""

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.validator = Draft202012Validator(_SCHEMA_LOADER.load_schema(schema_name))

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: первое найденное нарушение схемы
        """
        self.validator.validate(data)


class MetalogDistributionValidator(ContractValidator):
    """Контракт metalog_distribution: коэффициенты + носитель."""

    def __init__(self):
        super().__init__("metalog_distribution")


def validate_metalog_distribution(data: Dict[str, Any]) -> None:
    """
    Проверка payload источника коэффициентов.

    Raises:
        jsonschema.ValidationError: payload не соответствует metalog_distribution.json
    """
    MetalogDistributionValidator().validate(data)
