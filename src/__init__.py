"""
Bellman-Ford Arbitrage Detector - API support package

Result types and export routes layered on top of the graph builder and
relaxation engine.
"""
