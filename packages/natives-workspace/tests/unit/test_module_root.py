from natives.workspace import ModuleRootLocator, find_module_root


def test_module_root_is_nearest_package_json(workspace_factory):
    root = (
        workspace_factory.with_package_json("outer")
        .with_package_json("outer/node_modules/inner")
        .with_source("outer/node_modules/inner/lib/deep/index.js", "module.exports = 1;")
        .build()
    )

    found = find_module_root(root / "outer/node_modules/inner/lib/deep/index.js")

    assert found == root / "outer" / "node_modules" / "inner"


def test_node_modules_directory_also_marks_a_root(workspace_factory):
    root = workspace_factory.with_source("app/src/index.js", "").build()
    (root / "app" / "node_modules").mkdir()

    assert find_module_root(root / "app/src/index.js") == root / "app"


def test_locator_caches_per_file(workspace_factory):
    root = workspace_factory.with_package_json("pkg").with_source("pkg/index.js", "").build()
    locator = ModuleRootLocator()
    target = root / "pkg" / "index.js"

    first = locator.locate(target)
    # Removing the marker does not affect cached answers.
    (root / "pkg" / "package.json").unlink()
    second = locator.locate(target)

    assert first == second == root / "pkg"

    locator.clear()
    assert locator.locate(target) != root / "pkg"
