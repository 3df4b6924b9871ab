"""Static company profile and job listings."""

from __future__ import annotations

from chat_proxy.schemas.company import CompanyProfile, CompanyResponse, JobListing

COMPANY_PROFILE = CompanyProfile(
    name="PT. Teknologi Maju Indonesia",
    description=(
        "Perusahaan teknologi terdepan yang mengembangkan solusi inovatif untuk "
        "transformasi digital Indonesia."
    ),
    vision=(
        "Menjadi perusahaan teknologi terkemuka di Asia Tenggara yang memberikan solusi "
        "terbaik untuk masa depan digital."
    ),
    mission=(
        "Mengembangkan teknologi yang memudahkan kehidupan masyarakat dan mendorong "
        "pertumbuhan ekonomi digital Indonesia."
    ),
    established="2015",
    employees="500+",
    location="Jakarta, Indonesia",
)

JOB_LISTINGS: tuple[JobListing, ...] = (
    JobListing(
        title="Senior Frontend Developer",
        department="Engineering",
        type="Full-time",
        location="Jakarta/Remote",
        requirements=["React.js/Vue.js", "JavaScript ES6+", "3+ tahun pengalaman"],
        salary_range="15-25 juta",
    ),
    JobListing(
        title="Data Scientist",
        department="Data & Analytics",
        type="Full-time",
        location="Jakarta",
        requirements=["Python/R", "Machine Learning", "SQL", "2+ tahun pengalaman"],
        salary_range="18-30 juta",
    ),
    JobListing(
        title="Product Manager",
        department="Product",
        type="Full-time",
        location="Jakarta",
        requirements=["Product Management", "Agile/Scrum", "5+ tahun pengalaman"],
        salary_range="20-35 juta",
    ),
    JobListing(
        title="DevOps Engineer",
        department="Engineering",
        type="Full-time",
        location="Jakarta/Remote",
        requirements=["Docker/Kubernetes", "AWS/GCP", "CI/CD", "3+ tahun pengalaman"],
        salary_range="16-28 juta",
    ),
)


def get_company_data() -> CompanyResponse:
    return CompanyResponse(profile=COMPANY_PROFILE, jobs=list(JOB_LISTINGS))
