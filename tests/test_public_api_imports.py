def test_public_imports() -> None:
    # A lightweight contract test: keep the most common imports stable.
    import phzpy

    assert hasattr(phzpy, "__version__")

    from phzpy import ModelPhotometry, PhotometryBuilder, PhotometryMatrix  # noqa: F401
    from phzpy.function import Piecewise, Polynomial, integrate, multiply  # noqa: F401
