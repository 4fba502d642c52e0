pytest_plugins = ["mrwatch.testing.conftest"]
