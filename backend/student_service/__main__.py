from student_service.main import main

main()
