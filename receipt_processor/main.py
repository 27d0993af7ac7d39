import logging
import os
from datetime import datetime
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from receipt_processor.models.receipt import Receipt
from receipt_processor.models.receiptResponse import PointsResponse, ReceiptIdResponse
from receipt_processor.utils.errors import MalformedInputError, ReceiptNotFoundError
from receipt_processor.utils.pointsCalculator import PointsCalculator
from receipt_processor.utils.receiptStore import ReceiptStore

load_dotenv()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

INVALID_RECEIPT_MESSAGE = "The receipt is invalid."
RECEIPT_NOT_FOUND_MESSAGE = "No receipt found for that ID."


def get_receipt_store(request: Request) -> ReceiptStore:
    """Return the ReceiptStore owned by the running app"""
    return request.app.state.receipt_store


def get_points_calculator() -> PointsCalculator:
    """Create a new PointsCalculator instance"""
    return PointsCalculator()


async def invalid_receipt_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report unparseable or invalid receipts as 400 instead of FastAPI's default 422"""
    if isinstance(exc, RequestValidationError):
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
    else:
        errors = [{"loc": [], "msg": str(exc)}]

    logger.warning(f"Rejected invalid receipt on {request.url.path}: {errors}")
    return JSONResponse(
        status_code=400,
        content={"detail": INVALID_RECEIPT_MESSAGE, "errors": errors},
    )


def create_app(receipt_store: Optional[ReceiptStore] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        receipt_store: Store to serve receipts from. A fresh one is created if omitted

    Returns:
        FastAPI: The configured application
    """
    app = FastAPI(
        title="Receipt Processor API",
        description="API for submitting receipts and scoring them for points",
        version="1.0.0",
    )

    # Add gzip compression for larger responses
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.state.receipt_store = receipt_store if receipt_store is not None else ReceiptStore()

    app.add_exception_handler(RequestValidationError, invalid_receipt_handler)
    app.add_exception_handler(MalformedInputError, invalid_receipt_handler)

    @app.get("/")
    async def root():
        """Root endpoint to verify API is running"""
        return {"message": "Welcome to the Receipt Processor API", "status": "operational"}

    @app.get("/health")
    async def health_check(store: ReceiptStore = Depends(get_receipt_store)):
        """Health check endpoint for monitoring"""
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "receipts": len(store),
        }

    @app.post("/receipts/process", response_model=ReceiptIdResponse)
    async def process_receipt(
        receipt: Receipt,
        store: ReceiptStore = Depends(get_receipt_store),
    ):
        """
        Submit a receipt for processing

        Args:
            receipt: The receipt parsed from the JSON body
            store: Store the receipt is saved in

        Returns:
            JSON with the ID assigned to the receipt
        """
        logger.info(f"Processing receipt from '{receipt.retailer}' with {len(receipt.items)} items")
        receiptId = store.submit(receipt)
        return ReceiptIdResponse(id=receiptId)

    @app.get("/receipts/{id}/points", response_model=PointsResponse)
    async def get_points(
        id: str,
        store: ReceiptStore = Depends(get_receipt_store),
        calculator: PointsCalculator = Depends(get_points_calculator),
    ):
        """
        Get the points awarded for a stored receipt

        Args:
            id: ID returned when the receipt was processed
            store: Store the receipt is looked up in
            calculator: Calculator used to score the receipt

        Returns:
            JSON with the number of points awarded
        """
        try:
            stored = store.lookup(id)
        except ReceiptNotFoundError:
            raise HTTPException(status_code=404, detail=RECEIPT_NOT_FOUND_MESSAGE)

        points = calculator.calculatePoints(stored.receipt)
        logger.info(f"Receipt {id} awarded {points} points")
        return PointsResponse(points=points)

    return app


app = create_app()


def main():
    """Run the API server with uvicorn"""
    logger.info(f"Starting Receipt Processor API on {HOST}:{PORT}")
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
