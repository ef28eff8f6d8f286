"""Adaptadores concretos de los contratos del Core.

Cada módulo implementa un contrato de `core.interfaces` con una librería real
(`cryptography`, `keyring`, typer/click para la terminal).
"""
