from pathlib import Path

from keyforge.naming import Artifact, ArtifactForm, KeyKind, NamingScheme


def test_separate_suffixed_artifacts():
    artifacts = NamingScheme.SEPARATE_SUFFIXED.artifacts("alice")
    assert artifacts == [
        Artifact(Path("alice_private.key"), KeyKind.PRIVATE, ArtifactForm.BINARY),
        Artifact(Path("alice_private.pem"), KeyKind.PRIVATE, ArtifactForm.TEXT),
        Artifact(Path("alice_public.key"), KeyKind.PUBLIC, ArtifactForm.BINARY),
        Artifact(Path("alice_public.pem"), KeyKind.PUBLIC, ArtifactForm.TEXT),
    ]


def test_single_file_schemes():
    assert NamingScheme.SINGLE_COMBINED.artifacts("bob") == [
        Artifact(Path("bob.pem"), KeyKind.PRIVATE, ArtifactForm.TEXT)
    ]
    assert NamingScheme.EXPLICIT_PATHS.artifacts("keys/bob.pem") == [
        Artifact(Path("keys/bob.pem"), KeyKind.PRIVATE, ArtifactForm.TEXT)
    ]


def test_private_text_path_matches_saved_artifact():
    for scheme in NamingScheme:
        saved = [
            a.path
            for a in scheme.artifacts("carol")
            if a.kind is KeyKind.PRIVATE and a.form is ArtifactForm.TEXT
        ]
        assert saved == [scheme.private_text_path("carol")]


def test_names_may_include_directories():
    path = NamingScheme.SEPARATE_SUFFIXED.private_text_path(Path("keys") / "dave")
    assert path == Path("keys/dave_private.pem")
