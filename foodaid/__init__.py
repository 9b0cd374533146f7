"""FoodAid Portal - food-aid inventory, requests and distributions."""
