import hashlib
from pathlib import Path

from conftest import DEFAULT_MANIFEST, PNG_ONE, PNG_TWO, Project


def test_separate_checkouts_produce_identical_bundles(tmp_path: Path) -> None:
    first = _checkout(tmp_path / "checkout-a")
    second = _checkout(tmp_path / "checkout-b")

    first_result = first.run(cache_boost=True, compress=True, no_embed=True)
    second_result = second.run(cache_boost=True, compress=True, no_embed=True)

    assert [bundle.digest for bundle in first_result.bundles] == [
        bundle.digest for bundle in second_result.bundles
    ]
    assert _bundle_digest_map(first) == _bundle_digest_map(second)
    assert first.cache_path.read_bytes() == second.cache_path.read_bytes()


def test_glob_order_does_not_depend_on_creation_order(tmp_path: Path) -> None:
    first = _checkout(tmp_path / "checkout-a")
    second = _checkout(tmp_path / "checkout-b")
    for name in ("a.js", "b.js", "c.js"):
        first.write(f"javascripts/vendor/{name}", f"// {name}")
    for name in ("c.js", "b.js", "a.js"):
        second.write(f"javascripts/vendor/{name}", f"// {name}")
    for project in (first, second):
        project.write_manifest("javascripts:\n  vendor: 'vendor/*.js'\n")
        project.run()

    assert _bundle_digest_map(first) == _bundle_digest_map(second)
    assert first.bundled("javascripts", "vendor.js").read_bytes() == b"// a.js\n// b.js\n// c.js"


def _checkout(base: Path) -> Project:
    project = Project(base=base)
    project.write("stylesheets/one.css", "a{background:url(/images/one.png)}")
    project.write("stylesheets/two.css", "b{background:url('../images/two.png?embed')}")
    project.write("javascripts/one.js", "var x=0")
    project.write("javascripts/two.js", "var y=0")
    project.write("images/one.png", PNG_ONE)
    project.write("images/two.png", PNG_TWO)
    project.write_manifest(DEFAULT_MANIFEST)
    return project


def _bundle_digest_map(project: Project) -> dict[str, str]:
    digests: dict[str, str] = {}
    for path in sorted(project.root.rglob("*")):
        if path.is_file() and "bundled" in path.parts:
            digests[path.relative_to(project.root).as_posix()] = hashlib.sha256(path.read_bytes()).hexdigest()
    return digests
