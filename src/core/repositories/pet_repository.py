"""Abstract contract for pet record persistence."""

from abc import ABC, abstractmethod

from core.models.pet import Pet


class PetRepository(ABC):
    """Contract for loading and saving pet records.

    Saves are whole-document read-modify-write with no transactional
    guarantee: concurrent writers to the same pet race and the last
    write wins.
    """

    @abstractmethod
    def load_pet(self, *, pet_id: str) -> Pet:
        """Load a pet.

        Raises:
            NotFoundError: If the pet does not exist
            PersistenceError: If the read fails
        """

    @abstractmethod
    def save_pet(self, *, pet: Pet) -> Pet:
        """Create or replace a pet and return the stored record.

        Raises:
            PersistenceError: If the write fails
        """

    @abstractmethod
    def delete_pet(self, *, pet_id: str) -> None:
        """Delete a pet record. Deleting a missing pet is not an error.

        Raises:
            PersistenceError: If the delete fails
        """

    @abstractmethod
    def list_pets(self, *, pet_type: str | None = None, featured: bool | None = None) -> list[Pet]:
        """List every pet matching the optional filters, in storage order.

        Raises:
            PersistenceError: If the listing fails
        """
