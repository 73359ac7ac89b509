# transport_connect/__init__.py
"""
TransportConnect: ядро идентификации и жизненного цикла заявок на перевозку.
"""

__version__ = "1.0.0"
