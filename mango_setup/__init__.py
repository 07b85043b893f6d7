"""mango-setup — bootstrap the MangoWC compositor and the Noctalia shell."""

__version__ = "0.1.0"
