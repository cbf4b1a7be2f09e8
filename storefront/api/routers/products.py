# storefront/api/routers/products.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from storefront.api.dependencies import get_product_service
from storefront.api.responses import envelope
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/api/products", tags=["products"])

LIST_MESSAGE = "Products retrieved successfully"


@router.get("")
def list_products(request: Request, svc: ProductService = Depends(get_product_service)):
    result = svc.list_products(dict(request.query_params))
    return envelope(LIST_MESSAGE, **result)


@router.get("/featured")
def featured_products(
    limit: Optional[str] = Query(None),
    svc: ProductService = Depends(get_product_service),
):
    products = svc.get_featured(limit)
    return envelope("Featured products retrieved successfully", data=products, count=len(products))


@router.get("/category/{category_id}")
def products_by_category(
    category_id: str,
    request: Request,
    svc: ProductService = Depends(get_product_service),
):
    result = svc.list_by_category(category_id, dict(request.query_params))
    return envelope(LIST_MESSAGE, **result)


@router.get("/catId/{cat_id}")
def products_by_cat_id(cat_id: str, request: Request, svc: ProductService = Depends(get_product_service)):
    return envelope(LIST_MESSAGE, **svc.list_by_field("catId", cat_id, dict(request.query_params)))


@router.get("/subCatId/{sub_cat_id}")
def products_by_sub_cat_id(
    sub_cat_id: str, request: Request, svc: ProductService = Depends(get_product_service)
):
    return envelope(LIST_MESSAGE, **svc.list_by_field("subCatId", sub_cat_id, dict(request.query_params)))


@router.get("/thirdSubCatId/{third_sub_cat_id}")
def products_by_third_sub_cat_id(
    third_sub_cat_id: str, request: Request, svc: ProductService = Depends(get_product_service)
):
    params = dict(request.query_params)
    return envelope(LIST_MESSAGE, **svc.list_by_field("thirdSubCatId", third_sub_cat_id, params))


# musi byc ostatni, inaczej zlapie /featured
@router.get("/{product_id}")
def get_product(product_id: str, svc: ProductService = Depends(get_product_service)):
    return envelope("Product retrieved successfully", data=svc.get_product(product_id))
