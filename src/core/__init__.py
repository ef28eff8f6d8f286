"""Core de sym: dominio, contratos y servicios.

El Core no conoce la terminal ni las librerías concretas de cifrado/keychain;
solo decide *qué* hacer con las opciones del usuario.
"""

__version__ = "0.1.0"
