"""
Test suite for clusterlab.

This package contains all tests organized by component:
- test_data/: Tests for the dataset container and distance functions
- test_algorithms/: Tests for the clustering engines, linkages and metrics
"""
