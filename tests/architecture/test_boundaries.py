from pytest_archon import archrule


def test_query_independence() -> None:
    """
    The query package is the foundation: operators, normalization and
    matching must not know about adapters or data sources.
    """
    (
        archrule("query_is_independent")
        .match("diaspora_query*")
        .should_not_import("diaspora_core*")
        .check("diaspora_query")
    )


def test_primitives_isolation() -> None:
    """
    Primitives layer is the lowest level of core.
    It must not import from adapters, the data access layer or the registry.
    """
    (
        archrule("primitives_isolation")
        .match("diaspora_core.primitives*")
        .should_not_import("diaspora_core.adapters*")
        .should_not_import("diaspora_core.data_access_layer")
        .should_not_import("diaspora_core.registry")
        .check("diaspora_core", only_direct_imports=True)
    )


def test_adapter_base_layering() -> None:
    """
    The adapter base class should not depend on concrete adapters.
    """
    (
        archrule("adapter_base_layering")
        .match("diaspora_core.adapters.base")
        .should_not_import("diaspora_core.adapters.memory*")
        .should_not_import("diaspora_core.adapters.web_storage*")
        .should_not_import("diaspora_core.adapters.web_api*")
        .check("diaspora_core", only_direct_imports=True)
    )


def test_data_access_layer_is_adapter_agnostic() -> None:
    """
    The data access layer talks to the Adapter contract only.
    """
    (
        archrule("data_access_layer_isolation")
        .match("diaspora_core.data_access_layer")
        .should_not_import("diaspora_core.adapters.memory*")
        .should_not_import("diaspora_core.adapters.web_storage*")
        .should_not_import("diaspora_core.adapters.web_api*")
        .should_not_import("diaspora_core.registry")
        .check("diaspora_core", only_direct_imports=True)
    )
