# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from storefront.api.deps import get_storage, require_admin
from storefront.api.errors import http_error
from storefront.domain.enums import Category
from storefront.domain.errors import NotFound
from storefront.domain.schemas import ProductCreate, ProductOut, ProductUpdate
from storefront.repos.storage import Storage
from storefront.services.identity import CurrentUser
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(storage: Storage = Depends(get_storage)) -> ProductService:
    return ProductService(storage)


@router.get("", response_model=List[ProductOut])
def list_products(
    category: Category | None = Query(None),
    featured: bool | None = Query(None),
    new_arrival: bool | None = Query(None),
    svc: ProductService = Depends(get_service),
):
    return svc.list_products(category=category, featured=featured, new_arrival=new_arrival)


@router.get("/featured", response_model=List[ProductOut])
def featured_products(svc: ProductService = Depends(get_service)):
    return svc.list_products(featured=True)


@router.get("/new-arrivals", response_model=List[ProductOut])
def new_arrivals(svc: ProductService = Depends(get_service)):
    return svc.list_products(new_arrival=True)


@router.get("/category/{category}", response_model=List[ProductOut])
def products_by_category(category: Category, svc: ProductService = Depends(get_service)):
    return svc.list_products(category=category)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, svc: ProductService = Depends(get_service)):
    try:
        return svc.get_product(product_id)
    except NotFound as e:
        raise http_error(404, e)


#admin
@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    admin: CurrentUser = Depends(require_admin),
    svc: ProductService = Depends(get_service),
):
    return svc.create_product(payload)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    admin: CurrentUser = Depends(require_admin),
    svc: ProductService = Depends(get_service),
):
    try:
        return svc.update_product(product_id, payload)
    except NotFound as e:
        raise http_error(404, e)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    admin: CurrentUser = Depends(require_admin),
    svc: ProductService = Depends(get_service),
):
    try:
        svc.delete_product(product_id)
    except NotFound as e:
        raise http_error(404, e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
