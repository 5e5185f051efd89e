import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from brokerage.api.dependencies import get_notifier
from brokerage.database import get_db
from brokerage.models.inquiry import ContactInquiry, NewsletterSubscription
from brokerage.schemas.inquiry import ContactRequest, ContactResponse, NewsletterRequest, NewsletterResponse
from brokerage.services.notifications import EmailNotifier

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/contact", response_model=ContactResponse)
def submit_contact(request: ContactRequest, db: Session = Depends(get_db), notifier: EmailNotifier = Depends(get_notifier)):
    """Store a contact-form submission and forward it to the sales inbox."""
    name = request.name.strip()
    email = request.email.strip()
    message = request.message.strip()
    if not name or not email or not message:
        return JSONResponse(
            status_code=400,
            content=ContactResponse(success=False, error="Name, email, and message are required fields").model_dump(),
        )

    inquiry = ContactInquiry(
        name=name,
        email=email,
        phone=request.phone.strip(),
        interest=request.interest.strip(),
        message=message,
    )
    db.add(inquiry)
    db.commit()
    db.refresh(inquiry)
    logger.info(f"Contact inquiry {inquiry.id} from {email} ({inquiry.interest or 'General Inquiry'})")

    if notifier.configured:
        if not notifier.notify_contact(inquiry):
            return JSONResponse(
                status_code=500,
                content=ContactResponse(
                    success=False,
                    id=inquiry.id,
                    error="Failed to send message. Please try again later.",
                ).model_dump(),
            )
        inquiry.notified = True
        db.commit()

    return ContactResponse(success=True, id=inquiry.id)


@router.post("/newsletter", response_model=NewsletterResponse)
def subscribe_newsletter(request: NewsletterRequest, db: Session = Depends(get_db), notifier: EmailNotifier = Depends(get_notifier)):
    """Subscribe an email address to the newsletter."""
    email = request.email.strip().lower()
    if not email or "@" not in email:
        return JSONResponse(
            status_code=400,
            content=NewsletterResponse(success=False, message="Please provide a valid email address").model_dump(),
        )

    existing = db.query(NewsletterSubscription).filter(NewsletterSubscription.email == email).first()
    if existing:
        return NewsletterResponse(success=True, message="You are already subscribed to our newsletter.")

    subscription = NewsletterSubscription(email=email)
    db.add(subscription)
    db.commit()
    db.refresh(subscription)
    logger.info(f"Newsletter subscription {subscription.id}: {email}")

    if notifier.configured:
        if not notifier.notify_newsletter(subscription):
            return JSONResponse(
                status_code=500,
                content=NewsletterResponse(
                    success=False,
                    message="Failed to subscribe. Please try again later.",
                ).model_dump(),
            )
        subscription.notified = True
        db.commit()

    return NewsletterResponse(success=True, message="Thank you for subscribing to our newsletter!")
