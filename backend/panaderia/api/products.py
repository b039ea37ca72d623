"""
Products API Endpoints
Public catalog listing and admin product management (table `pan`)
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from panaderia.core.auth import TokenUser, require_admin
from panaderia.core.database import Database, get_database
from panaderia.domain.errors import OrderError
from panaderia.domain.product import ProductInput
from panaderia.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/productos", tags=["Productos"])


def get_product_repository(db: Database = Depends(get_database)) -> ProductRepository:
    return ProductRepository(db)


@router.get("")
def get_products(repo: ProductRepository = Depends(get_product_repository)):
    """
    Get all products (public)

    Returns the catalog as a plain array ordered by id, the shape the
    storefront renders
    """
    try:
        return [product.to_dict() for product in repo.find_all()]
    except OrderError:
        raise
    except Exception as e:
        logger.error(f"Error al obtener productos: {e}")
        raise HTTPException(status_code=500, detail="Error al obtener productos")


@router.get("/{product_id}")
def get_product(product_id: int, repo: ProductRepository = Depends(get_product_repository)):
    """Get a single product by ID"""
    try:
        product = repo.find_by_id(product_id)
    except OrderError:
        raise
    except Exception as e:
        logger.error(f"Error al obtener producto {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Error al obtener el producto")

    if not product:
        raise HTTPException(status_code=404, detail="Producto no encontrado")
    return product.to_dict()


@router.post("")
def create_product(
    data: ProductInput,
    user: TokenUser = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Add a product (admin only)"""
    try:
        product_id = repo.create(data)
    except OrderError:
        raise
    except Exception as e:
        logger.error(f"Error al insertar producto: {e}")
        raise HTTPException(status_code=500, detail="Error al agregar el producto")

    logger.info(f"[ADMIN: {user.username}] Agregó producto ID: {product_id} - {data.nombre}")
    return {"success": True, "mensaje": "Pan agregado correctamente", "id": product_id}


@router.put("/{product_id}")
def update_product(
    product_id: int,
    data: ProductInput,
    user: TokenUser = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Update a product (admin only)"""
    try:
        updated = repo.update(product_id, data)
    except OrderError:
        raise
    except Exception as e:
        logger.error(f"Error al actualizar producto: {e}")
        raise HTTPException(status_code=500, detail="Error al actualizar el producto")

    if not updated:
        raise HTTPException(status_code=404, detail="Producto no encontrado")

    logger.info(f"[ADMIN: {user.username}] Actualizó producto ID: {product_id}")
    return {"success": True, "mensaje": "Producto actualizado correctamente"}


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    user: TokenUser = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Delete a product (admin only)"""
    try:
        deleted = repo.delete(product_id)
    except OrderError:
        raise
    except Exception as e:
        logger.error(f"Error al eliminar producto: {e}")
        raise HTTPException(status_code=500, detail="Error al eliminar el producto")

    if deleted is None:
        raise HTTPException(status_code=404, detail="Producto no encontrado")

    logger.info(f"[ADMIN: {user.username}] Eliminó producto ID: {product_id} - {deleted.name}")
    return {"success": True, "mensaje": "Producto eliminado correctamente"}
