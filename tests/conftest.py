import pytest


@pytest.fixture
def sample_card_csv() -> str:
    """Sample card export as produced by the catalog spreadsheet."""
    return """Card ID,Set Name,Card Name,Card Number,Rarity,Image URL,USD Price,EUR Price,HP
base1-4,Base Set,Charizard,4/102,Rare Holo,https://img.example/4.png,$350.00,320,120
base1-58,Base Set,"Pikachu, Red Cheeks",58/102,Common,https://img.example/58.png,,,40

base1-63,Base Set,Squirtle,63/102,Common
base1-95,Base Set,Switch,95/102,Common,https://img.example/95.png,0.25,0.20,"""
