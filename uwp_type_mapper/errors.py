class DocumentSkipped(Exception):
    """Error raised, when a document is routinely excluded and contributes no notation.

    A skip never stops the corpus pass. The driver tallies it and moves on to the next document.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class NotRepresentableError(DocumentSkipped):
    """Error raised, when a type has no representation in the target language."""

    def __init__(self, language: str, context: str = ""):
        self.language = language
        reason = f"no {language} type" + (f" for {context}" if context else "")
        super().__init__(reason)


class TemplateFormatError(ValueError):
    """Error raised, when a document deviates from the reference-documentation template."""


class DuplicateEntryError(ValueError):
    """Error raised, when a write-once reference-map key is written a second time."""

    def __init__(self, key: str, existing_type: str, new_type: str):
        self.key = key
        self.message = (
            f"Reference map already holds an entry for {key!r} - "
            f"existing={existing_type}, new={new_type}."
        )
        super().__init__(self.message)


class CorpusParseError(Exception):
    """Error raised, when a single document aborts the whole corpus pass."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = f"An error is thrown from {path}: {message}"
        super().__init__(self.message)
