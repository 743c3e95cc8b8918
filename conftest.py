pytest_plugins = ["natives.test_utils.fixtures"]
