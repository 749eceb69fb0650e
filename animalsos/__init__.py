"""AnimalSOS backend: storage layer, services and JSON API."""
