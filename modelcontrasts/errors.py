# Top-level error classes


class ModelContrastsError(Exception):
    pass


# Specification errors


class ContrastsSpecificationError(ModelContrastsError):
    """
    The nominated contrasts are not consistent with themselves or with the
    levels against which they are being resolved.
    """


class LevelMismatchError(ContrastsSpecificationError):
    """
    The levels declared on a contrast specification differ from the levels
    observed in the data. The offending levels (present in one but not the
    other) are available as `.levels`.
    """

    def __init__(self, levels, message=None):
        self.levels = set(levels)
        super().__init__(
            message
            or f"Contrast levels not found in data or vice-versa: {list(levels)!r}."
        )


class InsufficientLevelsError(ContrastsSpecificationError):
    """
    Too few levels to define contrasts over.
    """

    def __init__(self, levels, required=2):
        self.levels = tuple(levels)
        self.required = required
        super().__init__(
            f"Not enough degrees of freedom to define contrasts: {len(self.levels)} "
            f"level(s) found ({list(self.levels)!r}), but at least {required} "
            "are required."
        )


class BaseLevelNotFoundError(ContrastsSpecificationError):
    def __init__(self, base, levels):
        self.base = base
        self.levels = tuple(levels)
        super().__init__(
            f"Base level `{base!r}` is not among the provided levels: {list(self.levels)!r}."
        )


# Materialization errors


class ContrastsMaterializationError(ModelContrastsError):
    pass


class UnknownLevelError(ContrastsMaterializationError):
    """
    The data has levels that are not present in the contrast matrix being used
    to encode it. The unknown levels are available as `.levels`.
    """

    def __init__(self, levels):
        self.levels = set(levels)
        super().__init__(
            f"Data has levels not present in the contrast matrix: {list(levels)!r}."
        )


class InvalidCodeError(ContrastsMaterializationError):
    """
    Observation codes must index into the data levels (or be -1 for missing
    values).
    """
