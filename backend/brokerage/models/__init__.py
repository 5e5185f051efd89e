from brokerage.models.inquiry import ContactInquiry, NewsletterSubscription

__all__ = ["ContactInquiry", "NewsletterSubscription"]
