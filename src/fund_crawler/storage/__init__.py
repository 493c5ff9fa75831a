"""
Storage layer: point schemas and the InfluxDB sink.
"""
