"""CloudControl provider."""
