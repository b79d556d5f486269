"""
Pack configuration for fsembed.

Collects the options of one packing run into a single object that flows
through walking, generation and writing.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fsembed.ingest.filters import DEFAULT_FILTERS

# Module that generated code imports File and Fs from
DEFAULT_IMPORT = "fsembed.runtime"

# Output suffix that selects aggregate mode
SOURCE_SUFFIX = ".py"


@dataclass
class PackConfig:
    """
    Options for one packing run.

    Attributes:
        files: Input files or directories, in order
        out: Output module (``*.py``), output directory, or "" for
            "next to each input file"
        force: Overwrite existing outputs
        import_path: Module the generated code imports ``File``/``Fs`` from
        var: Variable name (aggregate mode) or prefix (per-file mode)
        filters: Exclusion regular expressions
        verbose: Print progress information
    """

    files: list[str] = field(default_factory=list)
    out: str = ""
    force: bool = False
    import_path: str = DEFAULT_IMPORT
    var: str = ""
    filters: list[str] = field(default_factory=lambda: list(DEFAULT_FILTERS))
    verbose: bool = False

    def __post_init__(self):
        """Normalize loose values coming from the command line."""
        self.files = [f for f in self.files if f]
        self.out = self.out or ""
        self.import_path = (self.import_path or DEFAULT_IMPORT).strip()
        self.var = (self.var or "").strip()

    @property
    def aggregate(self) -> bool:
        """True when the whole tree goes into one module."""
        return self.out.endswith(SOURCE_SUFFIX)


def get_pack_config(
    files: list[str] | None = None,
    out: str = "",
    force: bool = False,
    import_path: str | None = None,
    var: str | None = None,
    filters: list[str] | None = None,
    verbose: bool = False,
) -> PackConfig:
    """
    Create a pack configuration with sensible defaults.

    Args:
        files: Inputs to pack
        out: Output path
        force: Overwrite existing outputs
        import_path: Override the runtime import
        var: Variable name or prefix
        filters: Override the default exclusion patterns
        verbose: Enable verbose output

    Returns:
        Configured PackConfig instance
    """
    config = PackConfig(
        files=list(files or []),
        out=out,
        force=force,
        verbose=verbose,
    )

    if import_path:
        config.import_path = import_path.strip()
    if var:
        config.var = var.strip()
    if filters is not None:
        config.filters = list(filters)

    return config
