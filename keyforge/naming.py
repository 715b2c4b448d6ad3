from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Union


class KeyKind(Enum):
    PRIVATE = "private"
    PUBLIC = "public"


class ArtifactForm(Enum):
    BINARY = ".key"
    TEXT = ".pem"


@dataclass(frozen=True)
class Artifact:
    path: Path
    kind: KeyKind
    form: ArtifactForm


class NamingScheme(Enum):
    """
    How a key name maps to files. `save` and `load_simple` both go through
    the same scheme, so whatever one writes the other can read back.
    """

    SEPARATE_SUFFIXED = "separate_suffixed"
    SINGLE_COMBINED = "single_combined"
    EXPLICIT_PATHS = "explicit_paths"

    def artifacts(self, name: Union[str, Path]) -> List[Artifact]:
        name = str(name)
        if self is NamingScheme.SEPARATE_SUFFIXED:
            # order matters: private material first, as callers expect
            return [
                Artifact(Path(f"{name}_{kind.value}{form.value}"), kind, form)
                for kind in (KeyKind.PRIVATE, KeyKind.PUBLIC)
                for form in (ArtifactForm.BINARY, ArtifactForm.TEXT)
            ]
        return [Artifact(self.private_text_path(name), KeyKind.PRIVATE, ArtifactForm.TEXT)]

    def private_text_path(self, name: Union[str, Path]) -> Path:
        name = str(name)
        if self is NamingScheme.SEPARATE_SUFFIXED:
            return Path(f"{name}_{KeyKind.PRIVATE.value}{ArtifactForm.TEXT.value}")
        if self is NamingScheme.SINGLE_COMBINED:
            return Path(f"{name}{ArtifactForm.TEXT.value}")
        return Path(name)
