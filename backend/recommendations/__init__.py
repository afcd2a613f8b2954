"""
Recommendations Module Summary
==============================

Ranks spots saved by other users for the current user and keeps the
signals the ranking is built on.

Key Features Implemented:
1. RecommendationService - additive, explainable scoring of candidate spots
2. RecommendationRepository - data access contract with a Django ORM implementation
3. Interaction log with per-type weights
4. UserPreferences derived from the interaction log
5. REST API endpoints
"""
