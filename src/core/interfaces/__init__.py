"""Protocolos que consumen los servicios del Core.

`RequestExecutor` es lo único que necesitan las probes de carga; el
`HttpExecutor` de adapters lo implementa, y un fake de tests también.
"""
