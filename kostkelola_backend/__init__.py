"""KostKelola boarding-house management backend."""
