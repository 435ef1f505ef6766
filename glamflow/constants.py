"""Built-in catalog used until the first services / staff push arrives"""

from .models import Promo, Service, Staff

DEFAULT_SERVICES = [
    Service(id="s1", name="Signature Haircut", duration=45, price=850, category="Hair",
            image="https://images.unsplash.com/photo-1560066984-138dadb4c035?auto=format&fit=crop&q=80&w=400"),
    Service(id="s2", name="Deep Tissue Massage", duration=60, price=1200, category="Spa",
            image="https://images.unsplash.com/photo-1544161515-4ab6ce6db874?auto=format&fit=crop&q=80&w=400"),
    Service(id="s3", name="Facial Rejuvenation", duration=50, price=1500, category="Skincare",
            image="https://images.unsplash.com/photo-1570172619644-dfd03ed5d881?auto=format&fit=crop&q=80&w=400"),
    Service(id="s4", name="Luxury Manicure", duration=30, price=600, category="Nails",
            image="https://images.unsplash.com/photo-1519014816548-bf5fe059e98b?auto=format&fit=crop&q=80&w=800"),
    Service(id="s5", name="Balayage & Color", duration=180, price=4500, category="Hair",
            image="https://images.unsplash.com/photo-1522337660859-02fbefca4702?auto=format&fit=crop&q=80&w=400"),
    Service(id="s6", name="Lash Extension", duration=90, price=1800, category="Skincare",
            image="https://images.unsplash.com/photo-1583001931096-959e9ad7b535?auto=format&fit=crop&q=80&w=800"),
    Service(id="s7", name="Brazilian Blowout", duration=120, price=3500, category="Hair",
            image="https://images.unsplash.com/photo-1562322140-8baeececf3df?auto=format&fit=crop&q=80&w=400"),
    Service(id="s8", name="Gel Pedicure Spa", duration=60, price=950, category="Nails",
            image="https://images.unsplash.com/photo-1516975080664-ed2fc6a32937?auto=format&fit=crop&q=80&w=400"),
    Service(id="s9", name="Korean Glass Skin", duration=75, price=2500, category="Skincare",
            image="https://images.unsplash.com/photo-1616394584738-fc6e612e71b9?auto=format&fit=crop&q=80&w=400"),
    Service(id="s10", name="Hot Stone Massage", duration=90, price=1600, category="Spa",
            image="https://images.unsplash.com/photo-1600334089648-b0d9d3028eb2?auto=format&fit=crop&q=80&w=400"),
]

DEFAULT_STAFF = [
    Staff(id="st1", name="Maria Santos", role="Senior Stylist", rating=4.9,
          avatar="https://i.pravatar.cc/150?u=maria"),
    Staff(id="st2", name="James Wilson", role="Massage Therapist", rating=4.8,
          avatar="https://i.pravatar.cc/150?u=james"),
    Staff(id="st3", name="Elena Cruz", role="Skincare Specialist", rating=5.0,
          avatar="https://i.pravatar.cc/150?u=elena"),
    Staff(id="st4", name="Rico Morales", role="Master Barber", rating=4.7,
          avatar="https://i.pravatar.cc/150?u=rico"),
    Staff(id="st5", name="Sarah Lim", role="Nail Artist", rating=4.9,
          avatar="https://i.pravatar.cc/150?u=sarah"),
    Staff(id="st6", name="Dr. Vicky B.", role="Dermatologist", rating=5.0,
          avatar="https://i.pravatar.cc/150?u=vicky"),
]

DEFAULT_PROMO = Promo(message="Book now and experience AI-enhanced beauty! ✨")

UNKNOWN_LABEL = "Unknown"
