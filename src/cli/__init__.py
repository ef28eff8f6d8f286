"""Capa de presentación: parser de flags (typer), componentes Rich y entrypoint."""
