from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from coursehub.core.config import settings
from coursehub.core.logging import configure_logging
from coursehub.endpoints import (
    admin, assignment, auth, category, course, course_module, course_progress, enrollment, material,
    review, student_assignment, student_auth, student_course, upload
)
from coursehub.middleware.exceptions import global_exception_handler, http_exception_handler, validation_exception_handler
from coursehub.middleware.logging import RequestLoggingMiddleware

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Staff
app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(category.router, prefix="/categories", tags=["Categories"])
app.include_router(course.router, prefix="/courses", tags=["Courses"])
app.include_router(course_module.router, prefix="/modules", tags=["Modules"])
app.include_router(material.router, prefix="/materials", tags=["Materials"])
app.include_router(assignment.router, prefix="/assignments", tags=["Assignments"])
app.include_router(enrollment.router, prefix="/enrollments", tags=["Enrollments"])
app.include_router(upload.router, prefix="/uploads", tags=["Uploads"])

# Students
app.include_router(student_auth.router, prefix="/student/auth", tags=["Student Auth"])
app.include_router(student_course.router, prefix="/student", tags=["Student Courses"])
app.include_router(course_progress.router, prefix="/student", tags=["Course Progress"])
app.include_router(student_assignment.router, prefix="/student", tags=["Student Assignments"])
app.include_router(review.router, tags=["Reviews"])


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "ok", "version": settings.VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
