"""Status codes and message templates for package validation.

Status codes 670-679 are the constraint-check categories, 690-699 the
import layer. A code is a stable contract: downstream tooling branches
on `status`, never on `statusText`.

Templates exist in English, German, French and Spanish. The active
language is process-wide and falls back to English.
"""

from __future__ import annotations

from pigcheck.models import Rsp

OK = 0
MISSING_ID = 670
DUPLICATE_ID = 671
PROPERTY_MISSING_CLASS = 672
PROPERTY_BAD_CLASS = 673
MISSING_REFERENCE = 674
BAD_REFERENCE = 675
INELIGIBLE = 676
OCCURRENCE = 678
VALUE_RANGE = 679
IMPORT_PARSE_ERROR = 690
IMPORT_TOO_LARGE = 692
IMPORT_INVALID_PACKAGE = 697

SUPPORTED_LANGUAGES = ("en", "de", "fr", "es")

_FAILED = {
    "en": "Package validation failed",
    "de": "Paket-Validierung fehlgeschlagen",
    "fr": "Échec de la validation du paquet",
    "es": "Error en la validación del paquete",
}

# code -> language -> template; templates take positional arguments
MESSAGES: dict[int, dict[str, str]] = {
    OK: {"en": "OK", "de": "OK", "fr": "OK", "es": "OK"},
    MISSING_ID: {
        "en": "{failed}: item at index {0} is missing id",
        "de": "{failed}: Element mit Index {0} hat keine id",
        "fr": "{failed}: l'élément à l'index {0} n'a pas d'id",
        "es": "{failed}: al elemento en el índice {0} le falta el id",
    },
    DUPLICATE_ID: {
        "en": "{failed}: duplicate ID '{0}' found at indices {1} and {2}",
        "de": "{failed}: doppelte ID '{0}' bei Indizes {1} und {2} gefunden",
        "fr": "{failed}: ID en double '{0}' trouvé aux indices {1} et {2}",
        "es": "{failed}: ID duplicado '{0}' encontrado en los índices {1} y {2}",
    },
    PROPERTY_MISSING_CLASS: {
        "en": "{failed}: item '{0}' hasProperty[{1}] has {2}",
        "de": "{failed}: Element '{0}' hasProperty[{1}] hat {2}",
        "fr": "{failed}: l'élément '{0}' hasProperty[{1}] a {2}",
        "es": "{failed}: el elemento '{0}' hasProperty[{1}] tiene {2}",
    },
    PROPERTY_BAD_CLASS: {
        "en": "{failed}: item '{0}' hasProperty[{1}].hasClass='{2}' - {3}",
        "de": "{failed}: Element '{0}' hasProperty[{1}].hasClass='{2}' - {3}",
        "fr": "{failed}: l'élément '{0}' hasProperty[{1}].hasClass='{2}' - {3}",
        "es": "{failed}: el elemento '{0}' hasProperty[{1}].hasClass='{2}' - {3}",
    },
    MISSING_REFERENCE: {
        "en": "{failed}: item '{0}' graph[{1}] {2} - {3}",
        "de": "{failed}: Element '{0}' graph[{1}] {2} - {3}",
        "fr": "{failed}: l'élément '{0}' graph[{1}] {2} - {3}",
        "es": "{failed}: el elemento '{0}' graph[{1}] {2} - {3}",
    },
    BAD_REFERENCE: {
        "en": "{failed}: item '{0}' graph[{1}] {2}: {3} - {4}",
        "de": "{failed}: Element '{0}' graph[{1}] {2}: {3} - {4}",
        "fr": "{failed}: l'élément '{0}' graph[{1}] {2}: {3} - {4}",
        "es": "{failed}: el elemento '{0}' graph[{1}] {2}: {3} - {4}",
    },
    INELIGIBLE: {
        "en": "{failed}: item '{0}' {1}[{2}].hasClass='{3}' is not in {4} {5}",
        "de": "{failed}: Element '{0}' {1}[{2}].hasClass='{3}' ist nicht in {4} {5}",
        "fr": "{failed}: l'élément '{0}' {1}[{2}].hasClass='{3}' n'est pas dans {4} {5}",
        "es": "{failed}: el elemento '{0}' {1}[{2}].hasClass='{3}' no está en {4} {5}",
    },
    OCCURRENCE: {
        "en": "{failed}: item '{0}' property '{1}' - {2}",
        "de": "{failed}: Element '{0}' Eigenschaft '{1}' - {2}",
        "fr": "{failed}: l'élément '{0}' propriété '{1}' - {2}",
        "es": "{failed}: el elemento '{0}' propiedad '{1}' - {2}",
    },
    VALUE_RANGE: {
        "en": "{failed}: item '{0}' hasProperty[{1}] (class '{2}') - {3}",
        "de": "{failed}: Element '{0}' hasProperty[{1}] (Klasse '{2}') - {3}",
        "fr": "{failed}: l'élément '{0}' hasProperty[{1}] (classe '{2}') - {3}",
        "es": "{failed}: el elemento '{0}' hasProperty[{1}] (clase '{2}') - {3}",
    },
    IMPORT_PARSE_ERROR: {
        "en": "{0} document could not be parsed: {1}",
        "de": "{0}-Dokument konnte nicht gelesen werden: {1}",
        "fr": "Le document {0} n'a pas pu être analysé: {1}",
        "es": "No se pudo analizar el documento {0}: {1}",
    },
    IMPORT_TOO_LARGE: {
        "en": "{0} document has {1} bytes, the limit is {2}",
        "de": "{0}-Dokument hat {1} Bytes, die Grenze ist {2}",
        "fr": "Le document {0} a {1} octets, la limite est {2}",
        "es": "El documento {0} tiene {1} bytes, el límite es {2}",
    },
    IMPORT_INVALID_PACKAGE: {
        "en": "{0} package validation failed: {1}",
        "de": "{0} Paket-Validierung fehlgeschlagen: {1}",
        "fr": "Échec de la validation du package {0}: {1}",
        "es": "Error en la validación del paquete {0}: {1}",
    },
}

_language = "en"


def set_language(lang: str) -> None:
    """Select the message language by IETF tag ('de', 'de-CH', ...); unknown tags select English."""
    global _language
    normalized = lang.lower()[:2]
    _language = normalized if normalized in SUPPORTED_LANGUAGES else "en"


def get_language() -> str:
    return _language


def get_message(code: int, *args: object) -> str:
    templates = MESSAGES.get(code)
    if templates is None:
        return f"Unknown error code {code}"
    template = templates.get(_language, templates["en"])
    return template.format(*args, failed=_FAILED[_language])


def msg(code: int, *args: object) -> Rsp:
    """Build a result record for `code` with the message rendered in the active language."""
    return Rsp(
        ok=code == OK or 199 < code < 300,
        status=code,
        status_text=get_message(code, *args),
    )


RSP_OK = Rsp(ok=True, status=OK, status_text="ok")
