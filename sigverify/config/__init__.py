from .settings import VerifierSettings, configure_logging, load_env

__all__ = ["VerifierSettings", "configure_logging", "load_env"]
