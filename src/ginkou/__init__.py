"""ginkou: a Japanese sentence bank indexed by word roots."""

__version__ = "0.1.0"

from ginkou.bank import SentenceBank as SentenceBank
from ginkou.exceptions import (
    ConfigError as ConfigError,
    ExtractionError as ExtractionError,
    GinkouError as GinkouError,
    IntegrityError as IntegrityError,
    SchemaError as SchemaError,
    StoreIOError as StoreIOError,
)
from ginkou.ingest import (
    add_sentence_with_words as add_sentence_with_words,
    ingest as ingest,
)
from ginkou.models import (
    BankStats as BankStats,
    IngestResult as IngestResult,
    QueryMode as QueryMode,
    Segment as Segment,
    SentenceModel as SentenceModel,
    Token as Token,
)
from ginkou.segmenter import (
    DEFAULT_DELIMITER as DEFAULT_DELIMITER,
    sentences as sentences,
    split_text as split_text,
)
from ginkou.tokenizer import (
    MecabExtractor as MecabExtractor,
    parse_analysis as parse_analysis,
)

__all__ = [
    # Store
    "SentenceBank",
    "QueryMode",
    # Pipeline
    "ingest",
    "add_sentence_with_words",
    # Segmentation
    "DEFAULT_DELIMITER",
    "sentences",
    "split_text",
    # Extraction
    "MecabExtractor",
    "parse_analysis",
    # Models
    "BankStats",
    "IngestResult",
    "Segment",
    "SentenceModel",
    "Token",
    # Exceptions
    "GinkouError",
    "StoreIOError",
    "SchemaError",
    "IntegrityError",
    "ExtractionError",
    "ConfigError",
]
