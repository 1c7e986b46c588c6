"""
Base repository pattern implementation.

This module provides the abstract base class for the repository pattern.
Repositories are the only place that talks to the SQLAlchemy session; the
service layer composes them into the operations of the admin panel.
"""

from abc import ABC
from typing import TypeVar, Generic, List, Optional, Dict, Any, Type
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import inspect

# Type variable for generic entity type
T = TypeVar('T')


class RepositoryError(Exception):
    """Base exception for repository operations."""
    pass


class NotFoundError(RepositoryError):
    """Exception raised when entity is not found."""
    
    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateError(RepositoryError):
    """Exception raised when attempting to create duplicate entity."""
    
    def __init__(self, entity_type: str, criteria: Dict[str, Any]):
        super().__init__(f"{entity_type} already exists with criteria: {criteria}")
        self.entity_type = entity_type
        self.criteria = criteria


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.
    
    This class implements the repository pattern, providing a clean
    abstraction over SQLAlchemy operations.
    """
    
    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize repository with database session and model class.
        
        Args:
            db: SQLAlchemy database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model
        self.id_column = inspect(model).primary_key[0]
    
    def get_by_id(self, entity_id: Any) -> T:
        """
        Get entity by ID.
        
        Args:
            entity_id: Entity identifier
            
        Returns:
            Entity instance
            
        Raises:
            NotFoundError: If entity not found
        """
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            raise NotFoundError(self.model.__name__, entity_id)
        return entity
    
    def get_by_id_optional(self, entity_id: Any) -> Optional[T]:
        """
        Get entity by ID, returning None if not found.
        
        Args:
            entity_id: Entity identifier
            
        Returns:
            Entity instance or None
        """
        return self.db.query(self.model).filter(
            self.id_column == entity_id
        ).first()
    
    def create(self, entity: T, commit: bool = True) -> T:
        """
        Create a new entity.
        
        Args:
            entity: Entity instance to create
            commit: Commit immediately; pass False to join a larger transaction
            
        Returns:
            Created entity with updated fields (e.g., ID)
            
        Raises:
            DuplicateError: If entity violates unique constraints
            RepositoryError: If database operation fails
        """
        try:
            self.db.add(entity)
            if commit:
                self.db.commit()
                self.db.refresh(entity)
            else:
                self.db.flush()
            return entity
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError(
                self.model.__name__,
                self._extract_entity_dict(entity)
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to create {self.model.__name__}: {str(e)}")
    
    def update(self, entity_id: Any, updates: Dict[str, Any], commit: bool = True) -> T:
        """
        Update an existing entity.
        
        Args:
            entity_id: Entity identifier
            updates: Dictionary of fields to update
            commit: Commit immediately; pass False to join a larger transaction
            
        Returns:
            Updated entity
            
        Raises:
            NotFoundError: If entity not found
            RepositoryError: If update fails
        """
        entity = self.get_by_id(entity_id)
        
        try:
            for key, value in updates.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)
            
            if commit:
                self.db.commit()
                self.db.refresh(entity)
            else:
                self.db.flush()
            return entity
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to update {self.model.__name__}: {str(e)}")
    
    def delete(self, entity_id: Any) -> bool:
        """
        Delete an entity by ID.
        
        Args:
            entity_id: Entity identifier
            
        Returns:
            True if an entity was deleted, False if there was nothing to delete
            
        Raises:
            RepositoryError: If deletion fails
        """
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            return False
        
        try:
            self.db.delete(entity)
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to delete {self.model.__name__}: {str(e)}")
    
    def exists(self, entity_id: Any) -> bool:
        """
        Check if entity exists by ID.
        
        Args:
            entity_id: Entity identifier
            
        Returns:
            True if entity exists
        """
        return self.db.query(self.model).filter(
            self.id_column == entity_id
        ).count() > 0
    
    def find_by(self, order_by: Any = None, limit: Optional[int] = None, **criteria) -> List[T]:
        """
        Find entities by multiple criteria.
        
        Args:
            order_by: Optional column expression to sort by
            limit: Maximum number of results
            **criteria: Search criteria as keyword arguments
            
        Returns:
            List of matching entities
        """
        query = self._filtered(**criteria)
        
        if order_by is not None:
            query = query.order_by(order_by)
        if limit is not None:
            query = query.limit(limit)
        
        return query.all()
    
    def find_one_by(self, **criteria) -> Optional[T]:
        """
        Find single entity by criteria.
        
        Args:
            **criteria: Search criteria as keyword arguments
            
        Returns:
            First matching entity or None
        """
        return self._filtered(**criteria).first()
    
    def count(self, **criteria) -> int:
        """
        Count entities matching criteria.
        
        Args:
            **criteria: Filter criteria as keyword arguments
            
        Returns:
            Number of matching entities
        """
        return self._filtered(**criteria).count()
    
    def commit(self) -> None:
        """Commit the current transaction."""
        self.db.commit()
    
    def rollback(self) -> None:
        """Rollback the current transaction."""
        self.db.rollback()
    
    def _filtered(self, **criteria):
        query = self.db.query(self.model)
        
        for key, value in criteria.items():
            if hasattr(self.model, key):
                query = query.filter(getattr(self.model, key) == value)
        
        return query
    
    def _extract_entity_dict(self, entity: T) -> Dict[str, Any]:
        """
        Extract entity attributes as dictionary.
        
        Args:
            entity: Entity instance
            
        Returns:
            Dictionary of entity attributes
        """
        mapper = inspect(type(entity))
        return {
            column.key: getattr(entity, column.key, None)
            for column in mapper.column_attrs
        }
