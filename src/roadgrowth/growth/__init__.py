"""Procedural road network growth: geometry, cost model, candidate queue and engine."""
