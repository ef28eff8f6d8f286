"""Servicios del Core: selección de comando, clave, entrada/salida y ejecución."""
